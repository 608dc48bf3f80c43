"""Test that the project setup is working correctly."""

import emergency_alert_dispatch


def test_version() -> None:
    """Test that version is defined."""
    assert emergency_alert_dispatch.__version__ == "0.1.0"


def test_import_modules() -> None:
    """Test that all submodules can be imported."""
    from emergency_alert_dispatch import authorization, bridge, config, dispatch, metrics
    from emergency_alert_dispatch.dispatch import transports

    assert authorization is not None
    assert bridge is not None
    assert config is not None
    assert dispatch is not None
    assert metrics is not None
    assert transports is not None
