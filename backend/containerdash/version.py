from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    try:
        return version("containerdash")
    except PackageNotFoundError:
        # Running from a source checkout
        return "0.0.0+dev"


__version__ = get_version()
