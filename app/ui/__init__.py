from .shell import AppShell, empty_state, kpi_row, muted, section_header, status_bar

__all__ = ["AppShell", "empty_state", "kpi_row", "muted", "section_header", "status_bar"]
