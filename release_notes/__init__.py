'''
Release Notes Generator

Creates a GitHub-release for a given tag. The release-notes cover all changes since the
previous tag (w.r.t. semver-ordering of all tags of the repository): commits and changed files
as returned from GitHub's compare-API, and the merged pull requests referenced from commit
messages (as done by GitHub for squash-merges, e.g. `fix bug (#42)`).

Release-notes are rendered from a mako-template (see `release_notes.render.DEFAULT_TEMPLATE`),
or by a custom render-function.

Entrypoint for programmatic use is `release_notes.pipeline.create_release`; the `github-release`
command (`release_notes.cli`) creates releases for multiple tags, reading configuration from a
config-file.
'''
