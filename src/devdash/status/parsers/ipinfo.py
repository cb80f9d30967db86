from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import ParseFailure


class IpInfo(BaseModel):
    """Subset of the ipinfo.io response that the dashboard shows."""
    ip: str
    org: str = ""
    city: str = ""
    region: str = ""
    country: str = ""

    model_config = ConfigDict(extra="ignore")


def parse(body: bytes) -> IpInfo:
    try:
        return IpInfo.model_validate_json(body)
    except ValidationError as e:
        raise ParseFailure("Parse error") from e
