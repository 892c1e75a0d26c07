def pytest_configure(config):
    config.addinivalue_line("markers", "slow: renders full-size canvases")
