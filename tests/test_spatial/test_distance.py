"""Tests for the distance function registry and pairwise evaluators."""

import pytest
import numpy as np

from spatial.core.distance import (
    DistanceFunction,
    resolve_distance_function,
    resolve_distance_kernel,
    distance_one_to_one,
    distance_one_to_many,
    distance_pairwise,
    distance_matrix,
)
from spatial.core.errors import InvalidArgumentError
from spatial.core.geodesic import haversine_distance, vincenty_distance

FUNCTIONS = ["Haversine", "Vincenty"]


class TestResolveDistanceFunction:
    """Tests for the name -> primitive registry."""

    def test_known_names(self):
        assert resolve_distance_function("Haversine") is haversine_distance
        assert resolve_distance_function("Vincenty") is vincenty_distance

    def test_enum_member(self):
        assert resolve_distance_function(DistanceFunction.VINCENTY) is vincenty_distance

    @pytest.mark.parametrize("name", ["Euclidean", "haversine", "VINCENTY", "", " Haversine"])
    def test_unknown_name(self, name):
        """Names are case-sensitive and never fuzzy-matched."""
        with pytest.raises(InvalidArgumentError, match="Unknown distance function"):
            resolve_distance_function(name)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_distance_function("Euclidean")


class TestResolveDistanceKernel:
    """Kernels return distances together with a non-convergence count."""

    @pytest.mark.parametrize("funname", FUNCTIONS)
    def test_matches_primitive(self, funname):
        ylon, ylat = np.array([1.0, 2.0]), np.array([1.0, 2.0])
        dist, n_failed = resolve_distance_kernel(funname)(0.0, 0.0, ylon, ylat)
        expected = resolve_distance_function(funname)(0.0, 0.0, ylon, ylat)
        np.testing.assert_array_equal(dist, expected)
        assert n_failed == 0

    def test_vincenty_counts_failures(self):
        kernel = resolve_distance_kernel("Vincenty")
        _, n_failed = kernel(0.0, 0.0, np.array([180.0, 1.0]), np.array([0.0, 1.0]))
        assert n_failed == 1

    def test_haversine_never_fails(self):
        _, n_failed = resolve_distance_kernel(DistanceFunction.HAVERSINE)(0.0, 0.0, 180.0, 0.0)
        assert n_failed == 0

    def test_unknown_name(self):
        with pytest.raises(InvalidArgumentError, match="Unknown distance function"):
            resolve_distance_kernel("Euclidean")


class TestDistanceOneToOne:

    @pytest.mark.parametrize("funname", FUNCTIONS)
    def test_matches_primitive(self, funname, cities):
        nyc, la = cities.iloc[0], cities.iloc[1]
        fun = resolve_distance_function(funname)
        assert distance_one_to_one(nyc.lon, nyc.lat, la.lon, la.lat, funname) == pytest.approx(
            fun(nyc.lon, nyc.lat, la.lon, la.lat)
        )

    def test_default_is_haversine(self):
        assert distance_one_to_one(0, 0, 0, 1) == pytest.approx(haversine_distance(0, 0, 0, 1))

    def test_returns_float(self):
        assert isinstance(distance_one_to_one(0, 0, 1, 1, "Vincenty"), float)


class TestDistanceOneToMany:

    @pytest.mark.parametrize("funname", FUNCTIONS)
    def test_order_and_length(self, funname, cities):
        dist = distance_one_to_many(
            cities.lon[0], cities.lat[0], cities.lon, cities.lat, funname
        )
        assert dist.shape == (4,)
        assert dist[0] == 0.0
        for j in range(4):
            assert dist[j] == pytest.approx(
                distance_one_to_one(cities.lon[0], cities.lat[0], cities.lon[j], cities.lat[j], funname),
                rel=1e-9,
            )

    def test_single_reference_point(self):
        dist = distance_one_to_many(0, 0, [0.0], [1.0])
        assert dist.shape == (1,)

    def test_mismatched_set(self):
        with pytest.raises(InvalidArgumentError):
            distance_one_to_many(0, 0, [0.0, 1.0], [1.0])


class TestDistancePairwise:

    @pytest.mark.parametrize("funname", FUNCTIONS)
    def test_elementwise(self, funname, cities):
        xlon, xlat = cities.lon.to_numpy(), cities.lat.to_numpy()
        ylon, ylat = xlon[::-1], xlat[::-1]
        dist = distance_pairwise(xlon, xlat, ylon, ylat, funname)
        assert dist.shape == (4,)
        for i in range(4):
            assert dist[i] == pytest.approx(
                distance_one_to_one(xlon[i], xlat[i], ylon[i], ylat[i], funname), rel=1e-9
            )

    def test_mismatched_lengths(self):
        """Must fail rather than truncate or broadcast."""
        with pytest.raises(InvalidArgumentError, match="differ in size"):
            distance_pairwise([0.0, 1.0], [0.0, 1.0], [0.0], [0.0])

    def test_single_element_does_not_broadcast(self):
        with pytest.raises(InvalidArgumentError):
            distance_pairwise([0.0], [0.0], [1.0, 2.0], [1.0, 2.0])

    def test_inputs_not_mutated(self):
        xlon = np.array([1.0, 2.0])
        xlat = np.array([3.0, 4.0])
        distance_pairwise(xlon, xlat, xlat, xlon, "Vincenty")
        np.testing.assert_array_equal(xlon, [1.0, 2.0])
        np.testing.assert_array_equal(xlat, [3.0, 4.0])


class TestDistanceMatrix:

    @pytest.mark.parametrize("funname", FUNCTIONS)
    def test_matches_one_to_one(self, funname, random_points):
        p = random_points
        xlon, xlat = p['xlon'][:8], p['xlat'][:8]
        matrix = distance_matrix(xlon, xlat, p['ylon'], p['ylat'], funname)
        assert matrix.shape == (8, 25)
        for i in range(8):
            for j in range(25):
                expected = distance_one_to_one(xlon[i], xlat[i], p['ylon'][j], p['ylat'][j], funname)
                assert matrix[i, j] == pytest.approx(expected, rel=1e-9)

    def test_diagonal_zeros_and_symmetry(self, cities):
        matrix = distance_matrix(cities.lon, cities.lat, cities.lon, cities.lat)
        np.testing.assert_array_equal(np.diag(matrix), [0, 0, 0, 0])
        np.testing.assert_allclose(matrix, matrix.T, rtol=1e-12)

    def test_known_distance(self, cities):
        matrix = distance_matrix(cities.lon, cities.lat, cities.lon, cities.lat)
        assert 3900 < matrix[0, 1] / 1000 < 4000

    def test_one_by_one(self):
        matrix = distance_matrix([0.0], [0.0], [0.0], [1.0])
        assert matrix.shape == (1, 1)

    def test_empty_reference(self):
        matrix = distance_matrix([0.0, 1.0], [0.0, 1.0], [], [])
        assert matrix.shape == (2, 0)


class TestUnknownFunctionEverywhere:
    """Every evaluator rejects an unknown function name."""

    def test_all_evaluators(self):
        with pytest.raises(InvalidArgumentError):
            distance_one_to_one(0, 0, 1, 1, "Euclidean")
        with pytest.raises(InvalidArgumentError):
            distance_one_to_many(0, 0, [1.0], [1.0], "Euclidean")
        with pytest.raises(InvalidArgumentError):
            distance_pairwise([0.0], [0.0], [1.0], [1.0], "Euclidean")
        with pytest.raises(InvalidArgumentError):
            distance_matrix([0.0], [0.0], [1.0], [1.0], "Euclidean")
