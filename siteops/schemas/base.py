from pydantic import BaseModel, ConfigDict


class WritePayload(BaseModel):
    """
    Base for create/update bodies.

    Undeclared keys are kept so the services can discard server-managed and
    derived fields (with a warning) and reject everything else by name.
    """
    model_config = ConfigDict(extra="allow")
