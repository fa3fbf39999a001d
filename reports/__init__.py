"""
Reports package for Tourna system.
"""

from .report_generator import ReportGenerator

__all__ = ['ReportGenerator']
