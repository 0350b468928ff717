import random

import pytest

from gerrymander.data.sample_maps import grid_map, tx_sample_map


@pytest.fixture
def grid():
    return grid_map()


@pytest.fixture
def tx():
    return tx_sample_map()


@pytest.fixture
def rng():
    return random.Random(2022)
