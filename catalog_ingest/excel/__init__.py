"""Workbook reading and header/column interpretation."""
