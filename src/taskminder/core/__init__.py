"""Taskminder Core -- 领域模型、端口接口与 SQLite 持久化实现"""
