"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import scanpay
    import scanpay.application.split
    import scanpay.cli.main
    import scanpay.receipt
    import scanpay.runtime
    import scanpay.runtime.receipt_server

    assert scanpay.__version__
    assert scanpay.application.split is not None
    assert scanpay.cli.main is not None
    assert scanpay.receipt is not None
    assert scanpay.runtime is not None
    assert scanpay.runtime.receipt_server.app is not None
