"""Services module for STRIDE CLI - sync layer and business logic.

Import from the submodules directly (e.g. ``stride_cli.services.project_store``);
the local adapter depends on ``stride_cli.services.reducers``, so this package
does not re-export anything.
"""
