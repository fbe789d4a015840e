"""Student requests app: students describe the housing they are looking for."""
