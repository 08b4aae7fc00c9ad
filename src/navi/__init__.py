"""navi — dual-axis Space/Journal navigation.

Layout:
    ~/.navi/
    ├── navi.toml                      # Optional config (see navi.config)
    └── data/
        ├── spaces_nodes_v2.json       # Space tree (flat node list)
        ├── journals_nodes_v2.json     # Journal tree (flat node list)
        ├── nav_last_loc_v2.json       # Last dual-path cursor
        ├── nav_history_v2.json        # Bounded navigation history
        └── .versions/                 # Rolling backups per key
"""

__version__ = "0.1.0"
