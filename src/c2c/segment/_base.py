# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np
from scipy.sparse import csr_array
from sklearn.base import TransformerMixin
from sklearn.utils.validation import check_is_fitted

from ..base import BaseEstimator


class SegmenterMixin:
    _estimator_type = "segmenter"

    def fit_predict(self, X, y=None, **fit_params):
        if y is None:
            return self.fit(X, **fit_params).predict(X)
        else:
            return self.fit(X, y, **fit_params).predict(X)


class BaseSegmenter(SegmenterMixin, TransformerMixin, BaseEstimator):
    """
    Base class for segmenters.

    Inheriting classes must set the ``labels_`` attribute to a list of arrays
    with the index position of the vertices in ``fit`` and implement
    ``_segment`` to find the vertices of new samples.

    Attributes
    ----------
    labels_ : list of shape (n_samples, )
        A list of n_samples arrays with the index of the vertices.
    """

    def _segment(self, X):
        raise NotImplementedError()

    def predict(self, X):
        """
        Predict the position of the vertices.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timesteps)
            The input data.

        Returns
        -------
        csr_array of shape (n_samples, n_timesteps)
            A boolean array with the vertices set to True.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False)
        rowind = []
        colind = []
        data = []

        for i, labels in enumerate(self._segment(X)):
            for vertex in labels:
                rowind.append(i)
                colind.append(vertex)
                data.append(1)

        return csr_array(
            (data, (rowind, colind)),
            shape=(X.shape[0], self.n_timesteps_in_),
            dtype=bool,
        )

    def transform(self, X):
        """
        Transform X such that each segment is labeled with a unique label.

        A vertex belongs to the segment it starts, and the last sample to the
        last segment.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timesteps)
            The input data.

        Returns
        -------
        ndarray of shape (n_samples, n_timesteps)
            An array with the segments annotated with a label.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False)
        X_out = np.zeros((X.shape[0], self.n_timesteps_in_), dtype=float)

        for i, labels in enumerate(self._segment(X)):
            current_label = 1
            for start in labels[:-1]:
                X_out[i, start:] = current_label
                current_label += 1

        return X_out
