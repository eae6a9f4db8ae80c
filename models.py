from typing import Any, Union
from pydantic import BaseModel, HttpUrl


class NormalizeRequest(BaseModel):
    tree: Union[dict[str, Any], list[Any], None] = None
    use_cache: bool = True


class NormalizeUrlRequest(BaseModel):
    tree_url: HttpUrl
    use_cache: bool = True


class CoerceRequest(BaseModel):
    value: Any = None
