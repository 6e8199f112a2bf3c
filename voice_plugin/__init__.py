"""
Voice plugin for the opencode assistant host.

Speaks on behalf of the assistant and archives its finished responses:
- speak tool: the assistant asks for text to be spoken aloud
- session.idle events: optional spoken announcement and response capture
- speech lock: no speech while the user is recording

Speech synthesis itself is delegated to a local TTS HTTP service, with a
shell script as fallback.
"""
