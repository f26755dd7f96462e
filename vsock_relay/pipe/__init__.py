from .event_pipe import EventPipe
