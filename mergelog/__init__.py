'''
mergelog

Generates a changelog from the merge requests found in the git history of a repository and
prepends it to an existing changelog file. Versions are taken from tags (`v1.2.3` or `1.2.3`);
each merge request is listed below the version whose tag first contains it. Versions already
recorded in the changelog are not processed again.
'''
