"""
Hand maintained facts about nightly build commits.

None of this can be derived from the build index. Entries are checked against
a clone of https://github.com/nodejs/node, with the git commands given for
each table.
"""

# Commits which are not present in the git repository (rebased away after
# the build was made). Check with `git rev-parse --verify --quiet $commit`.
MISSING_COMMITS = frozenset(
    [
        "60f2fa9a8b",
        "9cae65c510",
        "a4ed3ea214",
    ]
)

# Commits of builds with a .0.0 version which are not ancestors of master.
# Check with `git merge-base --is-ancestor $commit master`.
NON_MASTER_COMMITS = frozenset(
    [
        "2296a4fc0f",
        "3518372835",
        "60042ca70e",
        "6a04cc0a43",
        "6bbdd668bd",
        "6e78382605",
        "6eece7773e",
        "bf7c3dabb4",
        "d62e7bd1f9",
        "e6d1d54230",
    ]
)

# Order of the commits of builds made on the same date, newest first (the
# order of the build index). Check with
# `git merge-base --is-ancestor $older $newer`.
COMMIT_ORDER_BY_DATE = {
    "2018-01-29": ("5c8ce90c2f", "4a498335f5"),
    "2016-10-13": ("e4ee09a5b3", "804d57db67"),
    "2016-10-08": ("b35f22b135", "7084b9c5a1"),
    "2016-07-12": ("ef1f7661c7", "863952ebad"),
    "2016-04-15": ("81fd4581b9", "4a74fc9776"),
    "2016-03-07": ("449684752c", "061ebb39c9"),
    "2016-01-16": ("66b9c0d8bd", "da550aa063"),
}
