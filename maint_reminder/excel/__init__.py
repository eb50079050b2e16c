"""Maintenance log (workbook / CSV) reading."""
