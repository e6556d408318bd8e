# Services package init
"""
ComicShelf Backend — Services Layer
=====================================

What:  Archive access, entry classification and the strip index.
Why:   Routes handle HTTP; services own every rule about which archive
       members are strips and how they are looked up.

Service Inventory:
    - ArchiveSource / ArchiveEntry (abstract): container-agnostic archive access
    - ZipArchiveSource, SevenZipArchiveSource: concrete readers
    - open_archive(): picks a reader by file suffix
    - classify_entry(): admit/reject one archive member
    - build_index() / StripIndex: one-pass scan and read-only lookups
"""
