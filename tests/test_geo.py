"""Tests for great-circle distance."""

import math

import pytest

from cleanconnect.matching.geo import calculate_distance


class TestCalculateDistance:
    def test_same_point_is_zero(self):
        assert calculate_distance(40.7128, -74.0060, 40.7128, -74.0060) == 0.0

    def test_symmetric(self):
        there = calculate_distance(39.7817, -89.6501, 41.8781, -87.6298)
        back = calculate_distance(41.8781, -87.6298, 39.7817, -89.6501)
        assert there == back

    def test_springfield_to_chicago(self):
        # Roughly 180 miles as the crow flies.
        distance = calculate_distance(39.7817, -89.6501, 41.8781, -87.6298)
        assert 170 < distance < 190

    def test_one_degree_of_latitude(self):
        # 2 * pi * 3959 / 360
        assert calculate_distance(0, 0, 1, 0) == pytest.approx(69.1, abs=0.05)

    def test_rounded_to_one_decimal(self):
        distance = calculate_distance(39.7817, -89.6501, 39.80, -89.64)
        assert distance == round(distance, 1)

    def test_antipodal_points_do_not_fail(self):
        distance = calculate_distance(0, 0, 0, 180)
        assert distance == pytest.approx(math.pi * 3959, abs=0.1)
