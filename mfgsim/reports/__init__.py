"""Text, JSON and CSV reports of simulation results."""

from .report_generator import format_report, format_summary, write_csv, write_json, write_summary

__all__ = ["format_report", "format_summary", "write_csv", "write_json", "write_summary"]
