"""Non-cryptographic proving backends for tests."""
