import pytest

from upset_explorer.models import MarginalCode, Pattern


def make_pattern(pattern, count, point_est=1.0, lower=None, upper=None, num_snp=0):
    return Pattern(
        pattern=pattern,
        size=len(pattern.split("-")),
        count=count,
        point_est=point_est,
        lower=lower,
        upper=upper,
        num_snp=num_snp,
    )


@pytest.fixture
def patterns():
    return [
        make_pattern("A-B", 150, 1.2, 0.9, 1.6),
        make_pattern("C", 50, 2.0),
        make_pattern("A", 120, 1.1, 0.8, 1.5),
        make_pattern("B-C", 80, 1.5, 1.0, 2.2),
    ]


@pytest.fixture
def marginals():
    return [
        MarginalCode("A", 300),
        MarginalCode("B", 250),
        MarginalCode("C", 200),
        MarginalCode("D", 10),
    ]


@pytest.fixture
def messages():
    """Host channel stand-in collecting ``(channel, message)`` pairs."""
    received = []

    def sink(channel, message):
        received.append((channel, message))

    sink.received = received
    return sink
