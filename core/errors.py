"""
游戏业务异常定义

均为非法操作 (调用方应拒绝并保持原状态), 不是系统故障
"""


class QuatchError(ValueError):
    """基础异常类"""
    pass


class IllegalPlayError(QuatchError):
    """出牌不合法 (牌面不符/不在来源牌堆/用 2 或 10 起手)"""
    pass


class IllegalEatError(QuatchError):
    """存在合法出牌时试图吃牌"""
    pass


class StageError(QuatchError):
    """在错误的游戏阶段调用"""
    pass
