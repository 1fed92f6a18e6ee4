pytest_plugins = ["billtag.testing.fixtures"]
