# Authors: Isak Samsten
# License: BSD 3 clause

import pytest
from sklearn import clone
from sklearn.utils._param_validation import (
    InvalidParameterError,
    generate_invalid_param_val,
    generate_valid_param,
    make_constraint,
)

from ..base import BaseEstimator


def assert_exhaustive_parameter_checks(estimator: BaseEstimator):
    """
    Assert that all parameter are checked.

    Parameters
    ----------
    estimator : BaseEstimator
       The estimator to check.
    """
    assert hasattr(estimator.__class__, "_parameter_constraints")
    assert (
        estimator.get_params(deep=False).keys()
        == estimator.__class__._parameter_constraints.keys()
    )


def assert_parameter_checks(estimator: BaseEstimator, skip=None):
    """
    Assert that all parameter checks are correct.

    Parameters
    ----------
    estimator : BaseEstimator
        The estimator.
    skip : list, optional
        The parameter constraints to skip.
    """
    assert hasattr(estimator.__class__, "_parameter_constraints")
    for param, constraints in estimator.__class__._parameter_constraints.items():
        if skip is not None and param in skip:
            continue

        for constraint in (make_constraint(constraint) for constraint in constraints):
            try:
                invalid_value = generate_invalid_param_val(constraint)
            except NotImplementedError:
                invalid_value = None

            if invalid_value is not None:
                estimator_ = clone(estimator)
                estimator_.set_params(**{param: invalid_value})
                with pytest.raises(InvalidParameterError):
                    estimator_._validate_params()

            try:
                valid_value = generate_valid_param(constraint)
            except Exception:
                continue

            estimator_ = clone(estimator)
            estimator_.set_params(**{param: valid_value})
            estimator_._validate_params()
