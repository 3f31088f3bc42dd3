from emojilang.emitters.json_emitter import JSONEmitter
from emojilang.emitters.sexpr_emitter import SExprEmitter
from emojilang.emitters.source_emitter import SourceEmitter

__all__ = ["JSONEmitter", "SExprEmitter", "SourceEmitter"]
