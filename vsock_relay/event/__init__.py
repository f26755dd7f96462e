from .emitter import AbstractEmitter
