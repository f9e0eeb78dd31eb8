"""MS Teams Meetings slash command for Mattermost."""
