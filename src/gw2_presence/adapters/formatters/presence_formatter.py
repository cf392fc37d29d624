"""Formatter for presence records shown in the host's info panel."""

from gw2_presence.domain.models import PresenceRecord

PROFESSIONS = {
    1: "Guardian",
    2: "Warrior",
    3: "Engineer",
    4: "Ranger",
    5: "Thief",
    6: "Elementalist",
    7: "Mesmer",
    8: "Necromancer",
    9: "Revenant",
}


class PresenceFormatter:
    """Turns presence records into plain display text."""

    def __init__(self, offline_text: str = "Not in game") -> None:
        self.offline_text = offline_text

    def format_profession(self, profession: int) -> str:
        """Profession name, or a placeholder for unknown IDs."""
        return PROFESSIONS.get(profession, f"Profession {profession}")

    def format_location(self, record: PresenceRecord) -> str:
        """Map name with its region and continent when known."""
        parts = [p for p in (record.region_name, record.continent_name) if p]
        if not parts:
            return record.map_name
        return f"{record.map_name} ({', '.join(parts)})"

    def format_presence(self, record: PresenceRecord) -> str:
        """Format a record as one line per fact."""
        if record.is_empty:
            return self.offline_text

        character = f"{record.character_name} ({self.format_profession(record.profession)})"
        if record.commander:
            character += " [Commander]"
        lines = [
            f"Character: {character}",
            f"World: {record.world_name}",
            f"Map: {self.format_location(record)}",
        ]
        if record.waypoint_name:
            lines.append(f"Near: {record.waypoint_name}")
        return "\n".join(lines)

    def __call__(self, record: PresenceRecord) -> str:
        return self.format_presence(record)
