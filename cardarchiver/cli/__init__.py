# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Card Archiver CLI

Usage: cardarchiver [OPTIONS]
"""
