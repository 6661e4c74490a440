"""
bestof_pipeline.pipelines — Maintenance jobs run by the CLI.

Each function takes a PlaceStore (plus options) and returns plain data or
an UpdateResult, so the CLI only formats output.

    from bestof_pipeline.loaders.place_store import PlaceStore
    from bestof_pipeline.pipelines import cleanup

    fixes, result = cleanup.fix_slugs(PlaceStore(), "fitness", apply=False)
"""
