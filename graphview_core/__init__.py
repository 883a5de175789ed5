"""
Graph View core - live-graph synchronization, view state and the platform facade.

Subpackages:
    graph_platform – platform facade, workspace, configuration, plugin discovery, CLI
    services       – tree utility, local cache, view state, synchronization, serialization
"""
