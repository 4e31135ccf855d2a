from .forest_builder import Forest, HierarchyForests, TreeBuilder, TreeNode

__all__ = ["Forest", "HierarchyForests", "TreeBuilder", "TreeNode"]
