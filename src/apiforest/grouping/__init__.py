from .group_builder import Group, GroupBuilder, GroupingResult, GroupMode, group_sort_key

__all__ = ["Group", "GroupBuilder", "GroupingResult", "GroupMode", "group_sort_key"]
