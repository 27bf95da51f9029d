"""TestTemplate entity - reference skeleton used as a code generation hint."""

from datetime import datetime

from pydantic import Field

from testgen.entities.base import Entity, new_id, utcnow


class TestTemplate(Entity):
    """Test skeleton for one framework and category."""

    __test__ = False

    id: str = Field(default_factory=new_id)
    framework: str
    category: str
    template: str
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
