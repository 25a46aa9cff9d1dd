from beacon_node.main import main  # noqa: F401
