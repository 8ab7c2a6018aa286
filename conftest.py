"""Configures pytest further."""
import pytest

from blockrsa.keys import PrivateKey
from blockrsa.keys import PublicKey
from blockrsa.randomness import RandomSource


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


class ScriptedSource(RandomSource):
    """Replays a fixed list of raw draws, for deterministic generation tests."""
    strong = True

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randbits(self, bits):
        self.calls.append(bits)
        return self.values.pop(0)


@pytest.fixture
def scripted_source():
    return ScriptedSource


@pytest.fixture
def textbook_keys() -> tuple[PublicKey, PrivateKey]:
    """The classic p=5, q=11 key: n=55, phi=40, e=3, d=27."""
    return PublicKey(55, 3), PrivateKey(55, 27, 3, 5, 11)
