from vibecore.services.organization.organizer import ContentOrganizer

__all__ = ["ContentOrganizer"]
