"""
缓存键生成规则
"""


class CacheKeys:
    """缓存键生成器"""

    # 键前缀
    PREFIX = "scb"

    # 键模板
    CHART_DATA = "{prefix}:chart:data:{block_id}"

    @classmethod
    def chart_data_key(cls, block_id: str, prefix: str = None) -> str:
        """
        生成图表区块数据缓存键

        Args:
            block_id: 区块 ID（客户端生成，创建后不变）
            prefix: 键前缀，不提供则使用默认前缀

        Returns:
            缓存键
        """
        return cls.CHART_DATA.format(
            prefix=prefix or cls.PREFIX,
            block_id=block_id
        )
