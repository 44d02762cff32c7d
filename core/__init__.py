"""
Core - 配置、数据模型、异常和集群连接
"""
