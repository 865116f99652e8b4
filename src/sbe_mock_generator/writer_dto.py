from __future__ import annotations

from dataclasses import dataclass

from sbe_mock_generator import helper


@dataclass
class GroupGenerationContext:
    """Context object containing the names needed to generate the mock of a repeating group.

    Groups are nested classes of the class that declares them, so the base class of a group mock is
    referenced through the full path of its enclosing classes.

    Attributes:
        group_name: The schema name of the group (e.g., "fuelFigures")
        class_name: The class name of the group (e.g., "FuelFigures")
        base_type_name: Qualified name of the real group class (e.g., "Car.FuelFigures")
        mock_name: Name of the mock class (e.g., "FuelFiguresMock")
        property_name: Name of the property that holds the group on its parent (e.g., "fuel_figures")
    """

    group_name: str
    class_name: str
    base_type_name: str
    mock_name: str
    property_name: str

    @classmethod
    def create(cls, group_name: str, parent_type_name: str) -> GroupGenerationContext:
        """Factory method to create context with all name variants derived from the group name.

        Args:
            group_name: The schema name of the group
            parent_type_name: Qualified name of the real class that declares the group

        Returns:
            A fully initialized GroupGenerationContext
        """
        class_name = helper.format_class_name(group_name)

        return cls(
            group_name=group_name,
            class_name=class_name,
            base_type_name=f"{parent_type_name}.{class_name}",
            mock_name=helper.new_mock_name(class_name),
            property_name=helper.format_property_name(helper.to_lower_first_char(group_name)),
        )
