"""ViewModel package for selection state, settings and display formatting.

Call context:
    ``appkiller/app`` imports concrete view models from this package and binds
    presentation callbacks (CLI printers, GUI widgets) to their notifications.

Dependencies:
    Modules in this package depend on domain types and lightweight formatting
    helpers only. Host adapters and batch orchestration remain outside.

Responsibilities:
    - Own mutable selection/filter state and emit change notifications.
    - Transform domain records and reports into view-facing labels.
    - Keep settings typed and validated without touching storage.
"""
