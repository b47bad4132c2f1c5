"""
Error types raised while loading and compiling a site
"""


class SiteError(Exception):
    """
    Base class for all site loading and compilation errors.
    """


class UnknownDataSourceError(SiteError):
    def __init__(self, name: str):
        super().__init__(f"The data source '{name}' is not registered")
        self.name = name


class UnknownRouterError(SiteError):
    def __init__(self, name: str):
        super().__init__(f"The router '{name}' is not registered")
        self.name = name


class UnknownFilterError(SiteError):
    def __init__(self, name: str):
        super().__init__(f"The filter '{name}' is not registered")
        self.name = name


class UnknownLayoutError(SiteError):
    def __init__(self, identifier: str):
        super().__init__(f"The site has no layout with identifier '{identifier}'")
        self.identifier = identifier


class CannotFilterBinaryError(SiteError):
    def __init__(self, item_rep, filter_name: str):
        super().__init__(
            f"The filter '{filter_name}' does not support binary content "
            f"and cannot be applied to {item_rep}"
        )
        self.item_rep = item_rep
        self.filter_name = filter_name


class CannotLayoutBinaryError(SiteError):
    def __init__(self, item_rep):
        super().__init__(f"Binary content of {item_rep} cannot be laid out")
        self.item_rep = item_rep


class NoMatchingCompilationRuleError(SiteError):
    def __init__(self, item_rep):
        super().__init__(f"No compilation rule matches {item_rep}")
        self.item_rep = item_rep


class NoMatchingLayoutRuleError(SiteError):
    def __init__(self, layout):
        super().__init__(f"No layout rule or filter attribute for layout '{layout.identifier}'")
        self.layout = layout


class SnapshotExistsError(SiteError):
    def __init__(self, item_rep, snapshot: str):
        super().__init__(f"{item_rep} already has a snapshot named '{snapshot}'")
        self.item_rep = item_rep
        self.snapshot = snapshot


class NoSuchSnapshotError(SiteError):
    def __init__(self, item_rep, snapshot: str):
        super().__init__(f"{item_rep} has no snapshot named '{snapshot}'")
        self.item_rep = item_rep
        self.snapshot = snapshot


class UnmetDependencyError(SiteError):
    """
    Raised when compiled content is requested from a rep that has not been
    compiled yet. The compiler catches it to reorder compilation.
    """

    def __init__(self, item_rep):
        super().__init__(f"{item_rep} has not been compiled yet")
        self.item_rep = item_rep


class RecursiveCompilationError(SiteError):
    def __init__(self, item_reps):
        names = ", ".join(str(rep) for rep in item_reps)
        super().__init__(f"Item representations depend on each other: {names}")
        self.item_reps = list(item_reps)
