"""Framework-agnostic domain records and enums."""
