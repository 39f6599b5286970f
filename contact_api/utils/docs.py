from typing import Any, cast

from pydantic import BaseModel, ConfigDict

from ..exceptions.api_exception import APIException


def responses(default: type, *args: type[APIException], status_code: int = 200) -> dict[int | str, dict[str, Any]]:
    """Build the OpenAPI `responses` of an endpoint from its success model and the exceptions it may raise."""

    exceptions: dict[int, list[type[APIException]]] = {}
    for exc in args:
        exceptions.setdefault(exc.status_code, []).append(exc)

    return {
        status_code: {"model": default},
        **{
            code: {
                "description": "\n\n".join(f"**{exc.detail}**: {exc.description}" for exc in excs),
                "content": {
                    "application/json": {
                        "examples": {
                            exc.__name__: {
                                "summary": exc.detail,
                                "description": exc.description,
                                "value": {"success": False, "error": exc.detail},
                            }
                            for exc in excs
                        }
                    }
                },
            }
            for code, excs in exceptions.items()
        },
    }


def example(**kwargs: Any) -> ConfigDict:
    return ConfigDict(json_schema_extra={"example": kwargs})


def get_example(model: type[BaseModel]) -> dict[str, Any]:
    return cast(dict[str, Any], cast(dict[str, Any], model.model_config.get("json_schema_extra", {}))["example"])
