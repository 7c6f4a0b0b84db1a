# Authors: Isak Samsten
# License: BSD 3 clause
"""Base classes for all estimators."""

import itertools
import warnings

from sklearn.base import BaseEstimator as SklearnBaseEstimator
from sklearn.utils.fixes import parse_version

from . import __version__
from .utils.validation import check_array

__all__ = [
    "BaseEstimator",
]


class BaseEstimator(SklearnBaseEstimator):
    """Base estimator for all c2c estimators."""

    _doc_link_module = "c2c"

    @property
    def _doc_link_template(self):
        c2c_version = parse_version(__version__)
        if c2c_version.dev is None:
            version_url = f"{c2c_version.major}.{c2c_version.minor}"
        else:
            version_url = "master"
        return (
            "https://c2c.readthedocs.io/%s/api/{module_path}.html#{estimator_module}.{estimator_name}"
            % version_url
        )

    def _doc_link_url_param_generator(self, *args):
        estimator_name = self.__class__.__name__
        estimator_module = ".".join(
            itertools.takewhile(
                lambda part: not part.startswith("_"),
                self.__class__.__module__.split("."),
            )
        )
        return {
            "module_path": estimator_module.replace(".", "/"),
            "estimator_module": estimator_module,
            "estimator_name": estimator_name,
        }

    # Same additions as scikit-learn
    def __getstate__(self):
        """Get the state of the estimator.

        Add a new element to the dict we return `_c2c_version` which
        is we use to warn when setting the state.

        Returns
        -------
        dict
            The state
        """
        try:
            state = super().__getstate__()
        except AttributeError:
            state = self.__dict__.copy()

        if type(self).__module__.startswith("c2c."):
            return dict(state.items(), _c2c_version=__version__)
        else:
            return state

    # Same check as scikit-learn
    def __setstate__(self, state):
        """Set the state of the estimator.

        Gives a warning if a user tries to unpickle a object serialized
        from a older version of c2c.

        Parameters
        ----------
        state : The state
        """
        if type(self).__module__.startswith("c2c."):
            pickle_version = state.pop("_c2c_version", "pre-0.1")
            if pickle_version != __version__:
                warnings.warn(
                    "Trying to unpickle estimator {0} from version {1} when "
                    "using version {2}. This might lead to breaking code or "
                    "invalid results. Use at your own risk.".format(
                        self.__class__.__name__, pickle_version, __version__
                    ),
                    UserWarning,
                )
        try:
            super().__setstate__(state)
        except AttributeError:
            self.__dict__.update(state)

    def _check_n_timesteps(self, X, reset):
        n_timesteps = X.shape[-1]
        if reset:
            self.n_timesteps_in_ = n_timesteps

            # Set n_features_in_ for compatibility with scikit-learn
            self.n_features_in_ = n_timesteps
            return

        if not hasattr(self, "n_timesteps_in_"):
            # Skip this check if the expected number of expected input features
            # was not recorded by calling fit first. This is typically the case
            # for stateless transformers.
            return

        if n_timesteps != self.n_timesteps_in_:
            raise ValueError(
                f"X has {n_timesteps} timesteps, but {self.__class__.__name__} "
                f"is expecting {self.n_timesteps_in_} timesteps as input."
            )

    # We do not delegate to scikit-learn since the time series tables are
    # validated with c2c's check_array
    def _validate_data(self, X, reset=True, **check_params):
        X = check_array(X, input_name="X", estimator=self, **check_params)
        self._check_n_timesteps(X, reset=reset)
        return X
