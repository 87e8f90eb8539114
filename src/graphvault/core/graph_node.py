from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Dict, Optional


class GraphNode(BaseModel):
    """
    Represents a labeled node in the graph with a string property bag.

    Uses Pydantic for validation and serialization. The id is frozen once
    the node is built; label and properties can change at any time.
    """

    id: int = Field(..., ge=0, frozen=True, description="Unique node identifier")
    label: Optional[str] = Field(default=None, description="Node label")
    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Node properties"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "label": "Node1",
                "properties": {
                    "color": "red"
                }
            }
        }
    )

    @field_validator('properties', mode='before')
    @classmethod
    def validate_properties(cls, v):
        """Treat a missing property bag as empty."""
        if v is None:
            return {}
        return v

    @classmethod
    def new(cls, node_id: int, label: Optional[str] = None) -> "GraphNode":
        """Build a node with an empty property bag."""
        return cls(id=node_id, label=label)

    def get_property(self, key: str) -> Optional[str]:
        """
        Get a property value.

        Args:
            key: Property key to retrieve

        Returns:
            Property value, or None if the key is unset
        """
        return self.properties.get(key)

    def set_property(self, key: str, value: str) -> None:
        """
        Set a property, overwriting any previous value.

        Args:
            key: Property key
            value: Property value
        """
        self.properties[key] = value

    def remove_property(self, key: str) -> Optional[str]:
        """Remove a property and return its value, or None if it was unset."""
        return self.properties.pop(key, None)

    @property
    def property_count(self) -> int:
        """Get number of properties."""
        return len(self.properties)

    def has_property(self, key: str) -> bool:
        """Check if property exists."""
        return key in self.properties
