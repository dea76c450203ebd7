"""
WordBank Backend — Services Layer
===================================

Service Inventory:
    - RemoteFileStore (abstract): path-addressed store with revision tokens
    - GitHubContentStore: RemoteFileStore over the GitHub contents API
    - merge: pure parse / apply / serialize functions for the answers document
    - ImageService: upload validation (name, extension, size)
    - WordService: image commit → merge → document commit orchestration
"""
