"""
claude-sound - hook sound cues for Claude Code

Maps Claude Code lifecycle events to locally playable sounds by writing
managed entries into the host's ``settings.json`` hooks.

Core modules:
- validation: Event name and sound id whitelists
- hooks: Managed hook extraction and settings reconciliation
- settings_file: Scope paths, tolerant reads and atomic writes
- sound_library: Sound catalog discovery, ordering and resolution
- tones: Bundled tone pack rendering
- audio: External player selection, playback and preview
- tts / importer: Creating custom sounds
"""

__version__ = "0.4.0"
