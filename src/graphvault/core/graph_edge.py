from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Dict, Optional


class GraphEdge(BaseModel):
    """
    Represents a directed, weighted edge between two node ids.

    Identity, endpoints and weight are frozen at construction so that
    shortest-path results only change when the edge set changes.
    """

    id: int = Field(..., ge=0, frozen=True, description="Edge identifier, unique within a graph")
    from_id: int = Field(..., ge=0, frozen=True, description="Source node ID")
    to_id: int = Field(..., ge=0, frozen=True, description="Target node ID")
    weight: float = Field(
        default=1.0,
        ge=0.0,
        allow_inf_nan=False,
        frozen=True,
        description="Edge weight (finite, non-negative)"
    )
    label: Optional[str] = Field(default=None, description="Edge label")
    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Edge properties"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "from_id": 1,
                "to_id": 2,
                "weight": 1.5,
                "label": "RelatedTo",
                "properties": {
                    "since": "2024-01-15"
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
    def new(
        cls,
        edge_id: int,
        from_id: int,
        to_id: int,
        weight: float,
        label: Optional[str] = None
    ) -> "GraphEdge":
        """Build an edge with an empty property bag."""
        return cls(id=edge_id, from_id=from_id, to_id=to_id, weight=weight, label=label)

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
        return key in self.properties

    @property
    def is_self_loop(self) -> bool:
        """Check if edge is a self-loop."""
        return self.from_id == self.to_id
