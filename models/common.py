from typing import Annotated
from bson import ObjectId
from pydantic import BeforeValidator

# Mongo hands back ObjectId; the API speaks hex strings.
PyObjectId = Annotated[str, BeforeValidator(str)]

def new_object_id() -> str:
    return str(ObjectId())
