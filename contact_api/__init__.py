def _get_version() -> str:
    import tomllib
    from importlib.metadata import PackageNotFoundError, version
    from pathlib import Path
    from typing import cast

    pyproject = Path(__file__).parent.parent.joinpath("pyproject.toml")
    if not pyproject.exists():
        try:
            return version("contact-api")
        except PackageNotFoundError:
            return "0.0.0"

    with pyproject.open("rb") as file:
        return cast(str, tomllib.load(file)["tool"]["poetry"]["version"])


__version__ = _get_version()
