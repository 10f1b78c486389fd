# room_directory/services/seeding/__init__.py

"""
Seeding services package.

Loads the bundled sample directory or generates fake rooms so the read
service can be exercised locally. Writes happen only here, never on the
search path.
"""

from .directory_seeder import DirectorySeeder, SeedSummary

__all__ = [
    "DirectorySeeder",
    "SeedSummary",
]
