"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
