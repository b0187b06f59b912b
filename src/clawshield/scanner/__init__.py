"""Skill baseline scanning — run monitor-skills.sh and turn its output into issues."""
