# toolkit/schemas/responses.py
from typing import Any, Dict

from pydantic import BaseModel


class JSONEnvelope(BaseModel):
    """Wire shape of every JSON response: {"error", "message", "data"?}."""

    error: bool = False
    message: str = ""
    data: Any = None

    def to_wire(self) -> Dict[str, Any]:
        # data wordt weggelaten als hij leeg is
        payload = self.model_dump(mode="json", exclude={"data"})
        if self.data is not None:
            payload["data"] = self.data
        return payload
