from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = 'parquet-rows'


def get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return '0.0.0+unknown'
