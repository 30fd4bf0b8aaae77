import pytest

from mcintegral.utils import CI_METHODS, autocrit, t_crit, z_crit


def test_z_crit_known_values():
    assert z_crit(0.95) == pytest.approx(1.959964, rel=1e-5)
    assert z_crit(0.99) == pytest.approx(2.575829, rel=1e-5)


def test_t_crit_approaches_z():
    assert t_crit(0.95, 4) == pytest.approx(2.776445, rel=1e-5)
    assert t_crit(0.95, 10_000) == pytest.approx(z_crit(0.95), rel=1e-3)


@pytest.mark.parametrize(
    ("n", "method", "kind"),
    [
        (10, "auto", "t"),
        (29, "auto", "t"),
        (30, "auto", "z"),
        (10, "z", "z"),
        (10_000, "t", "t"),
    ],
)
def test_autocrit_selection(n, method, kind):
    crit, got = autocrit(0.95, n, method)
    assert got == kind
    assert crit > 1.9


def test_autocrit_single_sample():
    crit, kind = autocrit(0.95, 1, "t")
    assert kind == "t"
    assert crit == pytest.approx(t_crit(0.95, 1))


@pytest.mark.parametrize("confidence", [0.0, 1.0, -0.5, 1.2])
def test_invalid_confidence(confidence):
    with pytest.raises(ValueError, match="confidence"):
        z_crit(confidence)
    with pytest.raises(ValueError, match="confidence"):
        t_crit(confidence, 5)


def test_invalid_df():
    with pytest.raises(ValueError, match="df"):
        t_crit(0.95, 0)


def test_invalid_method():
    with pytest.raises(ValueError, match="method"):
        autocrit(0.95, 100, "bootstrap")


@pytest.mark.parametrize("method", CI_METHODS)
def test_every_ci_method_accepted(method):
    crit, kind = autocrit(0.95, 100, method)
    assert crit > 0
    assert kind in ("z", "t")
