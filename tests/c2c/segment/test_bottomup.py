import math

import numpy as np
import pytest

from c2c.changes import Change
from c2c.segment import (
    BottomUpSegmenter,
    bottom_up,
    extend_with_regrowth,
    segment,
    segment_changes,
)
from c2c.utils._testing import (
    assert_exhaustive_parameter_checks,
    assert_parameter_checks,
)


@pytest.fixture
def step():
    return np.array([[500.0, 500, 500, 100, 200, 300, 400, 500]])


def test_bottom_up(disturbance):
    dates, values = disturbance
    np.testing.assert_equal(bottom_up(dates, values), [0, 2, 3, 9, 15])


@pytest.mark.parametrize(
    "values", [np.full(11, 50.0), np.linspace(100, 600, 11), np.array([1.0, 2.0])]
)
def test_bottom_up_single_segment(values):
    dates = np.arange(values.shape[0], dtype=float)
    np.testing.assert_equal(bottom_up(dates, values), [0, values.shape[0] - 1])


def test_bottom_up_no_merge():
    values = np.array([0.0, 10.0] * 10)
    dates = np.arange(20, dtype=float)
    np.testing.assert_equal(
        bottom_up(dates, values, max_error=0, max_segments=100), np.arange(20)
    )


@pytest.mark.parametrize("max_segments", [1, 3, 6])
def test_bottom_up_max_segments(max_segments):
    values = np.array([0.0, 10.0] * 10)
    dates = np.arange(20, dtype=float)
    vertices = bottom_up(dates, values, max_error=0, max_segments=max_segments)
    assert vertices.shape[0] == max_segments + 1


def test_bottom_up_vertices(dates, X):
    for x in X:
        vertices = bottom_up(dates, x, max_error=20, max_segments=4)
        assert vertices[0] == 0
        assert vertices[-1] == x.shape[0] - 1
        assert (np.diff(vertices) > 0).all()
        assert vertices.shape[0] <= 5


def test_bottom_up_dates(disturbance):
    dates, values = disturbance
    vertices = bottom_up(dates * 2, values)
    np.testing.assert_equal(vertices, bottom_up(dates, values))


def test_segment(disturbance):
    dates, values = disturbance
    changes = segment(dates, values)
    assert [change.date for change in changes] == [
        2000.0,
        2002.0,
        2003.0,
        2009.0,
        2015.0,
    ]
    np.testing.assert_equal(
        [change.to_row() for change in changes],
        [
            [2000, 500, np.nan, np.nan, np.nan, 0, 2, 0],
            [2002, 500, 0, 2, 0, -300, 1, -300],
            [2003, 200, -300, 1, -300, 300, 6, 50],
            [2009, 500, 300, 6, 50, 0, 6, 0],
            [2015, 500, 0, 6, 0, np.nan, np.nan, np.nan],
        ],
    )
    assert all(change.regrowth is None for change in changes)


def test_segment_without_post_metrics(disturbance):
    dates, values = disturbance
    changes = segment(dates, values, post_metrics=False)
    assert not any(change.has_post_metrics for change in changes)


def test_segment_regrowth(disturbance):
    dates, values = disturbance
    changes = segment(dates, values, regrowth_metrics=True)
    regrowth = changes[2].regrowth
    assert regrowth.previous_value == 500.0
    assert regrowth.next_values == (250.0, 300.0, 350.0, 400.0, 450.0, 500.0)
    assert changes[2].to_row(post_metrics=False, regrowth_metrics=True)[-5:] == [
        250.0,
        pytest.approx(-250.0 / 300.0),
        2.0,
        4.0,
        6.0,
    ]
    assert all(
        change.regrowth is None for i, change in enumerate(changes) if i != 2
    )


def test_segment_regrowth_years(disturbance):
    dates, values = disturbance
    changes = segment(dates, values, regrowth_metrics=True, regrowth_years=(1, 2))
    assert changes[2].index_regrowth == 75.0
    assert changes[2].years_to_full_regrowth == 6


def test_segment_changes_regrowth_not_reached():
    dates = np.arange(2000, 2010, dtype=float)
    values = np.array([500.0] * 5 + [200.0, 250.0, 300.0, 350.0, 400.0])
    changes = segment_changes(dates, values, [0, 4, 5, 9], regrowth_metrics=True)
    assert changes[2].magnitude == -300.0
    assert changes[2].regrowth is None
    row = changes[2].to_row(regrowth_metrics=True)
    assert all(math.isnan(v) for v in row[-5:])


def test_segment_changes_regrowth_minimum_years():
    dates = np.arange(2000, 2010, dtype=float)
    values = np.array([500.0, 500.0, 200.0] + [500.0] * 7)
    changes = segment_changes(dates, values, [0, 1, 2, 3, 9], regrowth_metrics=True)
    assert len(changes[2].regrowth.next_values) == 6
    assert changes[2].years_to_full_regrowth == 1
    assert changes[2].index_regrowth == 300.0


def test_extend_with_regrowth(disturbance):
    dates, values = disturbance
    changes = extend_with_regrowth(segment(dates, values), dates, values)
    np.testing.assert_equal(
        [change.to_row(regrowth_metrics=True) for change in changes],
        [
            change.to_row(regrowth_metrics=True)
            for change in segment(dates, values, regrowth_metrics=True)
        ],
    )


def test_extend_with_regrowth_unknown_date(disturbance):
    dates, values = disturbance
    with pytest.raises(ValueError, match="not in dates"):
        extend_with_regrowth(
            [Change(2000.0, 500.0), Change(2003.5, 200.0, -300.0, 3.5)],
            dates,
            values,
        )

    with pytest.raises(ValueError, match="not in dates"):
        extend_with_regrowth([Change(2020.0, 500.0)], dates, values)


def test_segmenter_fit(step):
    segmenter = BottomUpSegmenter(max_error=10).fit(step)
    assert len(segmenter.labels_) == 1
    np.testing.assert_equal(segmenter.labels_[0], [0, 2, 3, 7])
    np.testing.assert_equal(segmenter.dates_, np.arange(8))
    assert segmenter.n_timesteps_in_ == 8


def test_segmenter_fit_dates(step):
    dates = np.arange(1990, 1998)
    segmenter = BottomUpSegmenter(max_error=10).fit(step, dates=dates)
    np.testing.assert_equal(segmenter.labels_[0], [0, 2, 3, 7])
    np.testing.assert_equal(segmenter.dates_, dates)


@pytest.mark.parametrize(
    "dates", [np.arange(7), np.array([0, 1, 2, 2, 3, 4, 5, 6]), np.arange(8)[::-1]]
)
def test_segmenter_invalid_dates(step, dates):
    with pytest.raises(ValueError):
        BottomUpSegmenter().fit(step, dates=dates)


def test_segmenter_predict(step):
    segmenter = BottomUpSegmenter(max_error=10)
    vertices = segmenter.fit_predict(step)
    assert vertices.shape == (1, 8)
    np.testing.assert_equal(
        vertices.toarray(), [[True, False, True, True, False, False, False, True]]
    )


def test_segmenter_transform(step):
    segmenter = BottomUpSegmenter(max_error=10)
    np.testing.assert_equal(
        segmenter.fit_transform(step), [[1, 1, 2, 3, 3, 3, 3, 3]]
    )


def test_segmenter_transform_n_timesteps(step):
    segmenter = BottomUpSegmenter().fit(step)
    with pytest.raises(ValueError, match="timesteps"):
        segmenter.transform(step[:, :5])


def test_segmenter_max_segments(X):
    segmenter = BottomUpSegmenter(max_error=0, max_segments=2).fit(X)
    assert all(labels.shape[0] == 3 for labels in segmenter.labels_)
    np.testing.assert_equal(segmenter.predict(X).sum(axis=1), 3)


def test_segmenter_parameter_checks():
    assert_exhaustive_parameter_checks(BottomUpSegmenter())
    assert_parameter_checks(BottomUpSegmenter())
