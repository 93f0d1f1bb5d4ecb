pytest_plugins = ["yamlq.testing"]
